"""File-based templates -- the most common real-world pattern.

Loads pages, partials and the layout from disk with FileSystemLoader. The
loader doubles as the partial source, so ``{{*nav}}`` finds ``nav.html``.

Run:
    python app.py
"""

from pathlib import Path

from plume import FileSystemLoader, Template

templates_dir = Path(__file__).parent / "templates"
loader = FileSystemLoader(templates_dir, extension=".html")

home_template = Template(loader["home"], escape="html", name="home.html")
about_template = Template(loader["about"], escape="html", name="about.html")
layout = Template(loader["base"], escape="html", name="base.html")

nav_items = [
    {"url": "/", "label": "Home"},
    {"url": "/about", "label": "About"},
]

home_output = home_template.render(
    {"site_name": "My Site", "nav_items": nav_items},
    templates=loader,
    parents=layout,
    title="Welcome",
    message="This is a plume-powered site with a shared layout.",
)

about_output = about_template.render(
    {"site_name": "My Site", "nav_items": nav_items},
    templates=loader,
    parents=layout,
    title="About Us",
    description="Built with plume, a logic-light template compiler.",
)


def main() -> None:
    print("=== Home Page ===")
    print(home_output)
    print()
    print("=== About Page ===")
    print(about_output)


if __name__ == "__main__":
    main()
