"""
Service layer.

Subpackages:
- base: ServiceResult and the BaseService error/transaction helpers
- common: Actor identity and UnitOfWork
- complaint: policy core, complaint and dashboard services, escalation sweep
- background: escalation scheduler
- file: attachment storage
- users: registration and actor resolution
"""
