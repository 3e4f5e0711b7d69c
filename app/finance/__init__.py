"""
Finance - Financial documents and the account ledger engine.

Sub-packages:
    finance.models: Company, Document, DocumentCounter (+ ledger models)
    finance.services: DocumentService, DocumentNumberService
    finance.ledger: Accounts, ledger entries, balance effects and reversals
    finance.state_machines: Document type and status enums
"""
