"""County-level presidential election results, reconciled for map rendering."""
