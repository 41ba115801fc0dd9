"""Django project package for Talking Notes."""
