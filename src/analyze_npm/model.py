"""
Core Manifest Model Objects

Defines the data structures flowing through the manifest pipeline:
    - PackageRecord (one input descriptor)
    - Manifest (the produced package.json document)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about files or JSON text
        - Represent data, not behavior
"""

from dataclasses import dataclass, field
from typing import Dict, Optional


MANIFEST_NAME = "analyze-npm"


@dataclass(frozen=True)
class PackageRecord:
    """
    A single package descriptor read from the input document.
    
    Immutable once read.
    
    Properties:
        name: npm package name (e.g., "react", "@babel/core")
        version: Version string as published (e.g., "18.2.0")
    
    NOTE:
        Fields are not validated. A descriptor missing either field
        loads with None in its place.
    """

    name: Optional[str]
    version: Optional[str]


@dataclass
class Manifest:
    """
    The package.json document written by the pipeline.
    
    Properties:
        name: 
            Package identifier of the produced manifest
            Always "analyze-npm" for manifests built by this tool
        
        dependencies: 
            Mapping of package name → version string
            Insertion order follows selection order
    
    INVARIANTS:
        - Every key corresponds to exactly one selected record name
        - No key appears twice (later records overwrite earlier ones)
    """

    name: str = MANIFEST_NAME
    dependencies: Dict[str, str] = field(default_factory=dict)
    
    def __len__(self) -> int:
        return len(self.dependencies)
