"""
App repositories and template expansion.
"""
from .repo import AppRepo
from .render import get_app_template_env, render_file
