"""Layouts -- wrapping a page in a chain of parent templates.

Each parent sees the previous output through the ``{{*}}`` content slot.
Parents may be Templates, raw text, or callables.

Run:
    python app.py
"""

from plume import CONTENT_SLOT, Template

page = Template(
    "<h1>{{title}}</h1>{{#posts}}<article>{{&body}}</article>{{/posts}}",
    escape="html",
    name="page.html",
)

base = Template(
    "<html><head><title>{{title}} | {{site}}</title></head>"
    "<body>{{*nav}}{{*}}</body></html>",
    escape="html",
    name="base.html",
)

# Raw text parents are compiled with the escape mode of the template they wrap
section = "<main class=\"{{section}}\">{{*}}</main>"


def minify(scope, registry) -> str:
    """Callable parent: post-process the wrapped output."""
    return registry.resolve(CONTENT_SLOT).replace("\n", "")


variables = {
    "site": "Plume",
    "title": "News & Notes",
    "section": "blog",
    "posts": [{"body": "First <post>"}, {"body": "Second"}],
}
templates = {"nav": "<nav>{{site}}</nav>"}

output = page.render(variables, templates=templates, parents=[section, base])
minified = page.render(variables, templates=templates, parents=[section, base, minify])


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
