from setuptools import setup

with open("VERSION", "r") as r:
    __version__ = r.read().strip()

setup(
    name="lastmod",
    version=__version__,
    description="Find the most recent modification date in a directory tree",
    long_description="",
    packages=["lastmod"],
    install_requires=[
        "humanfriendly",
        "pathspec>=0.12",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["lastmod=lastmod.__main__:main"],
    },
    zip_safe=False,
    python_requires=">=3.10",
    license="LGPL-2.1-or-later",
    classifiers=[
        "License :: OSI Approved :: GNU Lesser General Public License v2 or later (LGPLv2+)",
    ],
)
