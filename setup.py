import setuptools
import codecs
import os
import re

# Determine the directory containing this setup.py file
setup_dir = os.path.dirname(os.path.abspath(__file__))
readme_path = os.path.join(setup_dir, "README.md")

with codecs.open(readme_path, "r", "utf-8") as fh:
    long_description = fh.read()

# Read the version from the package, so it is defined in one place only
with codecs.open(os.path.join(setup_dir, "libs", "weeklytweet", "__init__.py"), "r", "utf-8") as fh:
    VERSION = re.search(r'^__version__ = "([^"]+)"', fh.read(), re.M).group(1)

required_url = []
required = []
requirements_path = os.path.join(setup_dir, "requirements.txt")
with open(requirements_path, "r") as freq:
    for line in freq.read().split():
        if "://" in line:
            required_url.append(line)
        else:
            required.append(line)

setuptools.setup(
    name="weeklytweet",
    version=VERSION,
    description="Weekly tweet of the most read blog articles, with an OAuth 1.0 (RFC 5849) request signer.",
    long_description=long_description,
    long_description_content_type="text/markdown",

    package_dir={'': 'libs'},
    packages=['weeklytweet', 'weeklytweet.test', 'weeklytweet.test.mock_api'],
    include_package_data=True,

    install_requires=required,
    dependency_links=required_url,
    extras_require={
        "test": ["pytest", "flask"],
    },
    entry_points={
        "console_scripts": ["weeklytweet=weeklytweet.__main__:main"],
    },
    python_requires='>=3.10',

    license="BSD-3 Clause",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
        "License :: OSI Approved :: BSD License"
     ],
)
