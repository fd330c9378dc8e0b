from setuptools import setup, find_packages

setup(
    name='fibcalc',
    version='0.1.0',
    packages=find_packages(where='src'),
    package_dir={'': 'src'},
    install_requires=[
        'PyYAML>=6.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'fibcalc=fibcalc.cli:main',
        ],
    },
    description='Arbitrary-size Fibonacci numbers using parallel fast doubling',
    long_description=open('README.md', encoding='utf-8').read(),
    long_description_content_type='text/markdown',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'Intended Audience :: Developers',
        'Topic :: Scientific/Engineering :: Mathematics',
    ],
    keywords='fibonacci fast-doubling bigint scientific-notation',
    python_requires='>=3.8',
)
