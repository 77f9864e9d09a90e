from setuptools import find_packages, setup

VERSION = '0.1.0'


TEST_REQS = [
    'timeout-decorator>=0.3.3',
    'coverage>=4.2',
    'pytest',
    'pytest-cov',
]


INSTALL_REQS = [
    'braceexpand>=0.1.2',
    'jsonschema>=3.0',
    'networkx>=2.0',
    'numpy>=1.13.1',
    'pandas>=1.1.0',
    'shortuuid>=0.5.0',
]

DEPLOY_REQS = ['twine', 'wheel']


setup(
    name='svreview',
    version='{}'.format(VERSION),
    package_dir={'': 'src'},
    packages=find_packages('src', exclude=['tests']),
    package_data={'svreview.schemas': ['config.json']},
    include_package_data=True,
    description='Clustering and decision tracking for the manual review of structural variant calls',
    install_requires=INSTALL_REQS,
    extras_require={
        'test': TEST_REQS,
        'dev': ['black', 'flake8'] + TEST_REQS + DEPLOY_REQS,
        'deploy': DEPLOY_REQS,
    },
    python_requires='>=3.7',
    entry_points={
        'console_scripts': [
            'svreview = svreview.main:main',
        ]
    },
)
