from setuptools import setup, find_packages
import re

# Read version from ownerpay/__init__.py
with open('ownerpay/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='owner-pay',
    version=version,
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={
        'ownerpay': ['tax_rules/*.yaml'],
    },
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
    ],
    extras_require={
        'mcp': [
            'mcp[cli]>=1.0.0,<2',
        ],
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'owner-pay=ownerpay.cli.__main__:main',
            'owner-pay-mcp=ownerpay.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='Owner salary tax, CPP and net-to-gross calculations for Canadian small businesses.',
    python_requires='>=3.10',
)
