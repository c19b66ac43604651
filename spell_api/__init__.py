"""
Spell API Module
================
Flask blueprint exposing the dictionary over HTTP.

Features:
- Single-word lookups
- Paragraph checking with per-word issues
- Health endpoint reporting dictionary state
"""

from .routes import spell_blueprint, DICTIONARY_KEY

__all__ = ['spell_blueprint', 'DICTIONARY_KEY']
__version__ = '1.0.0'
