"""Receipt text parsing and reconciliation for Brazilian fiscal receipts."""
