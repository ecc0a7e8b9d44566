"""Shared - общие компоненты: ошибки и логирование."""
