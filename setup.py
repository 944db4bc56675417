from setuptools import find_packages, setup

with open("README.md", encoding="utf-8") as fh:
    long_description = fh.read()
with open("papermark/semver.txt", encoding="utf-8") as fh:
    semver = fh.read().strip()
with open("requirements.txt", encoding="utf-8") as fh:
    install_requires = [x.strip() for x in fh.read().strip().split("\n") if len(x) and x[0].isalpha()]

setup(
    name="papermark",
    version=semver,
    description="Renders a small bracket-tag markup language, recovering from badly-nested tags.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["papermark", "papermark.*"]),
    package_data={"papermark": ["py.typed", "semver.txt"]},
    include_package_data=True,
    install_requires=install_requires,
    extras_require={"dev": ["pytest"]},
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.9",
        "Topic :: Text Processing :: Markup",
    ],
    entry_points={"console_scripts": ["papermark = papermark:main"]},
)
