"""
Ragraph Setup Script

Install with: pip install -e .
"""

from setuptools import setup, find_packages

setup(
    name='ragraph',
    version='0.1.0',
    description='Hybrid retrieval engine over pgvector and a FalkorDB token graph',
    author='Ragraph Team',
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={
        'ragraph.pipeline.extraction': ['config/*.yaml'],
    },
    install_requires=[
        'fastapi>=0.104.0',
        'uvicorn[standard]>=0.24.0',
        'python-multipart>=0.0.6',
        'sqlalchemy>=2.0.0',
        'asyncpg>=0.29.0',
        'greenlet>=3.0.0',
        'pydantic>=2.5.0',
        'pyyaml>=6.0.1',
        'numpy>=1.26.0',
        'aiohttp>=3.9.0',
        'click>=8.1.0',
        'structlog>=23.2.0',
        'falkordb>=1.0.0',
        'python-dotenv>=1.0.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.4.0',
            'pytest-asyncio>=0.23.0',
            'httpx>=0.25.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'ragraph=ragraph.cli:cli',
        ],
    },
    python_requires='>=3.11',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Scientific/Engineering :: Artificial Intelligence',
        'Topic :: Database',
    ],
)
