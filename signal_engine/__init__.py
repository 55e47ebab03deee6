"""Hybrid Signal Engine — technical + sentiment fusion for stock dashboards."""
