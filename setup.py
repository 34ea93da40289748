from setuptools import setup

setup(
    name="mdhtml",
    version="0.1.0",
    description="Indentation-based markup with snippets and folder iteration that compiles to a static html site",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=['mdhtml'],
    python_requires=">=3.8",
    install_requires=[
        "watchdog",
        "pyyaml"
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["mdhtml=mdhtml.__main__:main"],
    },
)
