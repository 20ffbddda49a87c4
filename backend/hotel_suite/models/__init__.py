"""ORM entities and API schemas"""
