from setuptools import setup, find_packages
import re

# Read version from gml/__init__.py
with open('gml/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='gml',
    version=version,
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'google-api-python-client',
        'google-auth',
        'google-auth-oauthlib',
        'google-auth-httplib2',
        'httplib2',
        'python-dotenv',
        'click>=8.0',
        'PyYAML',
        'rich',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'gml=gml.cli.__main__:main',
        ],
    },
    author='CLI Developer',
    description='gml - Gmail command-line client for listing and reading messages.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
)
