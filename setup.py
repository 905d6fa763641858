#!/usr/bin/env python
# -*- coding: utf-8 -*-
from setuptools import setup

# There are problems running setup.py on Windows if the encoding is not set
with open('README.md', encoding='utf8') as readme_file:
    readme = readme_file.read()


setup(
    name='hubshipper',
    version='0.4.0',
    description="Ships structured log records to Azure Event Hubs over HTTPS.",
    long_description=readme,
    long_description_content_type="text/markdown",
    author="hubshipper maintainers",
    packages=[
        'hubshipper',
        'hubshipper.config',
        'hubshipper.delivery',
    ],
    package_dir={'hubshipper': 'hubshipper'},
    package_data={'hubshipper': ['VERSION']},
    entry_points={
        'console_scripts': [
            'hubshipper=hubshipper.cli:cli'
        ]
    },
    include_package_data=True,
    install_requires=[
        'Click>=8.0',
        'httpx>=0.26',
        'certifi',
        'pydantic>=2.0',
        'tenacity>=8.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    python_requires=">=3.9",
    license="MIT license",
    zip_safe=False,
    keywords='eventhubs logging fluentd azure',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ]
)
