# careshift_project_root/data_processing/cached.py
# STREAMLIT CACHING LAYER

import streamlit as st

from .loaders import FacilityData, load_facility_data


@st.cache_resource
def get_cached_facility_data() -> FacilityData:
    """Loads the facility dataset once per process and shares it across sessions."""
    return load_facility_data()
