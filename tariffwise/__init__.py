"""TariffWise: Streamlit dashboard for tariff lookup, simulation and comparison."""

__version__ = "1.0.0"
