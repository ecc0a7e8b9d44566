"""Services - бизнес-логика жизненного цикла задач."""
