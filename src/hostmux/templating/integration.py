"""Kida environment setup.

One environment per app, created once when the app is frozen. Isolated
host engines get their own environment, so a host's templates and
globals never leak into another host.
"""

from kida import Environment, FileSystemLoader

from hostmux.config import AppConfig
from hostmux.templating.returns import InlineTemplate, Template


def create_environment(config: AppConfig) -> Environment:
    """Create a kida Environment from app configuration.

    Without a ``template_dir`` the environment has no loader and can only
    render inline templates.
    """
    options = {
        "autoescape": config.autoescape,
        "auto_reload": config.debug,
        "trim_blocks": config.trim_blocks,
        "lstrip_blocks": config.lstrip_blocks,
    }
    if config.template_dir:
        return Environment(loader=FileSystemLoader(str(config.template_dir)), **options)
    return Environment(**options)


def render_template(env: Environment, tpl: Template) -> str:
    """Render a file template to string."""
    return env.get_template(tpl.name).render(tpl.context)


def render_inline(env: Environment, tpl: InlineTemplate) -> str:
    """Render a string template to string."""
    return env.from_string(tpl.source).render(tpl.context)
