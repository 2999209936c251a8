from setuptools import setup, find_packages

setup(
    name='zipkin-quickstart',
    version='0.1.0',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    python_requires='>=3.10',
    install_requires=[
        'requests',
        'rich',
        'platformdirs',
        'PyYAML',
    ],
    extras_require={
        'test': [
            'pytest<9.1',
            'pytest-mock',
        ],
    },
    entry_points={
        'console_scripts': [
            'zipkin-quickstart=zipkin_quickstart.cli:main',
        ],
    },
)
