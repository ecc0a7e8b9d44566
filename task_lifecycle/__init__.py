"""Task Lifecycle Service.

Отслеживание жизненного цикла задач, выполняемых во внешнем backend.
"""

__version__ = "1.0.0"
