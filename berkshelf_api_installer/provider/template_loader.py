"""Template loader for service templates."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

base_path = Path(__file__).parent.parent / "templates"
jinja_env = Environment(
    loader=FileSystemLoader(base_path),
    undefined=StrictUndefined,
    keep_trailing_newline=True,
)


def get_template(template_name: str):
    """Load a Jinja2 template from the templates directory.

    Args:
        template_name: Path of the template below templates/ (without .j2 extension)

    Returns:
        Jinja2 Template object

    Raises:
        jinja2.TemplateNotFound: If template file doesn't exist
    """
    template_file = f"{template_name}.j2"
    return jinja_env.get_template(template_file)
