"""xlsx export reading (pandas/openpyxl)."""
