"""
Core domain model, decimal primitives, and contracts.

Модуль не зависит от внешних систем (хранилищ, сетевых протоколов).
"""
