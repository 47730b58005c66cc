# Home.py - Main entry point for the Investment Bubble Lab
import streamlit as st

st.set_page_config(
    page_title="Investment Bubble Lab",
    page_icon="🫧",
    layout="wide"
)

st.title("🫧 Investment Bubble Lab")

st.markdown("""
Welcome to the Investment Bubble Lab! This interactive application lets you explore:

### 🧭 How the dashboard is organized

- **🫧 Investment Bubbles** – Every country is a bubble sized by its foreign direct investment (FDI)
  stock. Group all bubbles around one center, or split them by world region, and switch between
  inward and outward stock for 2000, 2005, 2010 and 2014.
- **🚨 Crime Categories** – Tick violent and property crime categories; your selection is stored in
  the page URL so it can be bookmarked or shared.

### 🔧 Shared controls
- Bubble area, not radius, is proportional to the amount invested.
- Hover over a bubble for the country, amount and year.
- Layout constants can be tuned in `bubble_config.toml` next to this file.

---

👈 **Use the sidebar to navigate between different views**

### Data Sources
- UNCTAD FDI inward and outward stock (millions of US dollars)
- Reported incidents by crime category
""")

st.markdown("---")
st.subheader("Quick Start")

col1, col2 = st.columns(2)

with col1:
    st.info(
        "🫧 **Investment Bubbles**\n\nStart with the grouped view, then press **By region** and watch the bubbles drift to their continents."
    )

with col2:
    st.info(
        "🚨 **Crime Categories**\n\nPick categories to compare; reload the page and your selection is still there."
    )
