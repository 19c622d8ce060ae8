from setuptools import setup, find_namespace_packages


setup(
    name='flip_core',
    version='0.1',
    packages=find_namespace_packages(where="src", include=["flip_core*"]),
    package_dir={"": "src"},
    python_requires=">=3.8",
    install_requires=[
        'flask>=2.2',
        'flask-openapi3>=3.0',
        'pydantic>=2.0',
        'python-dotenv>=1.0',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'flip_core = flip_core.main:main',
        ],
    },
)
