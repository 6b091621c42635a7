"""
License Store Service Django project.
"""
