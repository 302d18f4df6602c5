from setuptools import setup
from anvilview import __version__


with open('requirements.txt') as file:
    REQUIREMENTS = [
        line for line in map(str.strip, file)
        if line and not line.startswith('-e')
    ]

with open('README.md', encoding='utf-8') as file:
    README = file.read()


setup(
    name='anvilview',
    version=__version__,
    description='Read Minecraft Anvil region files and map the regions of a world',
    long_description=README,
    long_description_content_type='text/markdown',
    license='MIT',
    packages=['anvilview', 'anvilview.visualizations'],
    python_requires='>=3.9',
    install_requires=REQUIREMENTS,
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'anvilview = anvilview.cli:main',
        ],
    },
)
