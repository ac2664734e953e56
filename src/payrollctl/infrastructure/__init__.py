"""Infrastructure layer — relational storage and migrations.

May import from domain; never from services, commands, or output.
"""
