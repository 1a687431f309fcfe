"""Coloca a raiz do projeto no sys.path para os testes (imports como `from config import ...`)."""
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))
