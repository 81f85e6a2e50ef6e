"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que cumplen entidades y colecciones.
- El esquema depende de la abstracción, no de las clases concretas.
"""
