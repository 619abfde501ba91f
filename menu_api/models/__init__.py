from .base import Base
from .menu import Menu
