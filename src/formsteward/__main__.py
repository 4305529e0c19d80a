"""Permite ejecutar: python -m formsteward"""

from formsteward.cli import app

if __name__ == "__main__":
    app()
