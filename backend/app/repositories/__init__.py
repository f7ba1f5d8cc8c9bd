# Repositories package init
"""
Portfolio Backend — Persistence Layer
=======================================

Repositories wrap an AsyncSession and own every SQL statement. Services never
build queries; they call repository methods and receive ORM objects.
"""
