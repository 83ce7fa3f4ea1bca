"""AquaTools Streamlit application: pages, form layouts and UI services."""
