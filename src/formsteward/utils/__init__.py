"""Utilidades internas de formsteward."""
