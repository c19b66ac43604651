"""
Speller Tests Package
=====================
Test suite for the dictionary, tokenizer, command-line driver and HTTP API.

Run all tests: python3 -m pytest tests/ -v
Run specific: python3 -m pytest tests/test_dictionary.py -v
"""
