"""Domain packages: one per resource, each split into schemas, repository, service and router"""
