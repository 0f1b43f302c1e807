#!/usr/bin/env python3
"""
Demonstration of bounded 3D Voronoi construction.

This script shows:
1. Seeded random site generation (box corners included, sorted from the max corner)
2. Diagram construction and per-cell statistics
3. Point lookup with the border tie-break
4. Diagnostics
"""

import numpy as np
from py_voronoi3d.core import AleaPRNG, VoronoiDiagram, generate_sites, sort_by_distance
from py_voronoi3d.utils.logging_config import configure_logging


def main():
    configure_logging("WARNING", "console")

    lo, hi = [0.0, 0.0, 0.0], [100.0, 100.0, 100.0]
    prng = AleaPRNG("demo_seed")

    print("=== Bounded 3D Voronoi Demo ===\n")

    # 1. Sites
    print("1. Generating sites...")
    sites = generate_sites(12, lo, hi, prng=prng, include_corners=True)
    sites = sort_by_distance(sites, hi)
    print(f"   - {len(sites)} sites, closest to max corner: {sites[0].tolist()}")

    # 2. Diagram
    print("\n2. Building diagram...")
    diagram = VoronoiDiagram(sites, lo, hi)
    for i, region in enumerate(diagram.regions):
        print(f"   - cell {i:2d}: {len(region.faces):2d} faces, "
              f"{len(region.borders):2d} borders, volume {region.volume:10.2f}")
    print(f"   - total volume {diagram.total_volume():.2f} of {diagram.bounds.volume:.2f}")

    # 3. Lookup
    print("\n3. Point lookup...")
    test_point = np.array([prng.uniform(lo[k], hi[k]) for k in range(3)])
    index = diagram.find_region(test_point)
    print(f"   - {test_point.round(2).tolist()} -> cell {index}, "
          f"site {diagram.sites[index].round(2).tolist()}")

    # 4. Diagnostics
    print("\n4. Diagnostics...")
    report = diagram.validate()
    print(f"   - volume error: {report['volume_error']:.2e}")
    print(f"   - sites outside their cell: {report['sites_outside_cell']}")


if __name__ == "__main__":
    main()
