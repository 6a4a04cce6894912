"""
HTTP application exposing the payment webhook and internal endpoints.
"""
