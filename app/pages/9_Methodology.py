import streamlit as st

st.set_page_config(page_title="Methodology", layout="wide")
st.title("Methodology")

st.markdown(
    r"""
### Half-hour buckets

- The day is split into 48 buckets; bucket \(k\) covers minutes \([30k, 30k+30)\).

### Coverage

- For each agent not on vacation with an active block:
  \[
  \text{work}_k = \max(0, \min(\text{end}, 30k+30) - \max(\text{start}, 30k))
  \]
  and \(\text{break}_k\) likewise for the break window.
- The agent counts as **one** head in bucket \(k\) when \(\text{work}_k - \text{break}_k > 0\).
- Days missing from the roster use 09:00–17:00 with a 60-minute break at 13:00.

### Demand

- Each hourly share is split evenly into its two half hours.
- Expected tickets:
  \[
  v_k = \text{daily} \cdot \frac{p_k}{\sum_j p_j}
  \]

### Required agents

\[
\text{required}_k = \left\lceil \frac{v_k \cdot \text{AHT}}{\max(0.1,\ 30 \cdot \text{occupancy})} \right\rceil + \text{buffer}
\]

### Vacations

- Ranges are inclusive; ranges that overlap or touch (gap of zero days) are merged into one.
"""
)
