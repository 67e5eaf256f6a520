"""Hello World -- the smallest plume example.

Build a template from a string and render it with variables.

Run:
    python app.py
"""

from plume import Template

template = Template("Hello, {{name}}!")

output = template.render({"name": "World"})


def main() -> None:
    print(output)
    print()

    # The compiled renderer is reused for every call
    for name in ["Plume", "Templates", "Python"]:
        print(template.render(name=name))


if __name__ == "__main__":
    main()
