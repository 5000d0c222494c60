"""Install the user accounts service."""

from setuptools import setup, find_packages

setup(
    name='user-accounts',
    version='0.1.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        "flask",
        "flask-sqlalchemy>=3.0",
        "sqlalchemy>=2.0",
        "pyjwt>=2.0",
        "redis",
        "fakeredis",
        "bcrypt",
        "wtforms",
        "email-validator",
        "python-json-logger>=3.1",
        "pytz",
    ],
    extras_require={
        'test': [
            "pytest",
            "hypothesis",
        ]
    },
    zip_safe=False
)
