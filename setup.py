#!/usr/bin/env python3

from setuptools import setup, find_packages
import os

directory = os.path.dirname(os.path.realpath(__file__))


if __name__ == "__main__":
    setup(
        name="decompscene",
        packages=find_packages(include=["decompscene", "decompscene.*"]),
        python_requires='>3.10.0',
        version="0.1.0",
        license="MIT",
        description="Scene data extraction from decompiled SM64 level sources",
        author="mirmik",
        author_email="mirmikns@yandex.ru",
        long_description=open(os.path.join(
            directory, "README.md"), "r", encoding="utf8").read(),
        long_description_content_type="text/markdown",
        keywords=["sm64", "decomp", "level", "mesh"],
        classifiers=[],
        include_package_data=True,
        install_requires=[
            "numpy",
        ],
        extras_require={
            "test": ["pytest"],
        },
        entry_points={
            "console_scripts": [
                "decompscene=decompscene.__main__:main",
            ],
        },
        zip_safe=False,
    )
