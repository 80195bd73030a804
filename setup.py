from setuptools import find_packages, setup

package_list = find_packages(
  include=[
    "fossil_scm",
    "fossil_scm.*",
  ]
)

setup(
  name="fossil-scm",
  version="0.1.0",
  description="Changelog extraction from fossil timeline, info and RSS output",
  python_requires=">=3.11",
  packages=package_list,
  include_package_data=True,
  install_requires=[
    "pyyaml",
    "pydantic",
    "python-dotenv",
    "platformdirs",
  ],
  extras_require={
    "dev": ["pytest", "pytest-cov"],
  },
)
