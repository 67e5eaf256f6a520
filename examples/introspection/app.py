"""Template introspection -- what a template reads before rendering it.

``referenced_variables()``, ``referenced_templates()`` and
``referenced_sections()`` report the names a template uses, and
``compile().dump()`` prints the step program the renderer executes.

Run:
    python app.py
"""

from plume import Template

template = Template(
    "{{*header}}{{#posts}}<h2>{{title}}</h2>{{^comments}}No comments{{/comments}}"
    "{{/posts}}{{?admin}}{{*toolbar}}{{/admin}}",
    name="blog.html",
)

variables = template.referenced_variables()
partials = template.referenced_templates()
sections = template.referenced_sections()

program = template.compile()
listing = program.dump()


def missing(context: dict) -> set[str]:
    """Top-level names the context does not provide."""
    return {name for name in variables | sections if name not in context}


missing_partial = missing({"posts": []})
missing_complete = missing({"posts": [], "title": "", "comments": [], "admin": False})


def main() -> None:
    print("=== Template Introspection ===\n")
    print(f"  Variables: {sorted(variables)}")
    print(f"  Partials:  {sorted(partials)}")
    print(f"  Sections:  {sorted(sections)}")
    print(f"  Missing:   {sorted(missing_partial)}")
    print()
    print(listing)


if __name__ == "__main__":
    main()
