#!/usr/bin/env python3
"""
Socket Manifold Example

Builds a small 3/4" schedule 40 manifold from solvent-weld fittings:
- Tee at the origin
- 100 mm pipe from each run outlet
- Cap on the left run, 90° elbow on the right run
- Threaded bushing reducing the branch to 3/8"

Outputs:
- STEP file for 3D CAD
"""

from pathlib import Path

from pvcfit import (
    Assembly,
    lookup_spec,
    make_bushing,
    make_cap,
    make_elbow,
    make_pipe,
    make_tee,
)


def main():
    output_dir = Path(__file__).parent / "output"
    output_dir.mkdir(exist_ok=True)

    print("Socket Manifold Example")
    print("=" * 60)

    spec = lookup_spec(40, dn="DN20")
    branch = lookup_spec(40, name="3/8")
    print(f"Spec: {spec.name} ({spec.dn}), od={spec.od} mm, id={spec.id:.2f} mm")

    asm = Assembly()
    asm.add("tee", make_tee(spec))

    # Run
    asm.attach("left_pipe", make_pipe(spec, 100, ends=["spigot", "spigot"]), "A", to=("tee", "A"))
    asm.attach("right_pipe", make_pipe(spec, 100, ends=["spigot", "spigot"]), "A", to=("tee", "B"))
    asm.attach("cap", make_cap(spec), "A", to=("left_pipe", "B"))
    asm.attach("elbow", make_elbow(spec), "A", to=("right_pipe", "B"))

    # Branch: bushing spigot into the tee's socket, 3/8" female thread on top
    bushing = make_bushing(spec, branch, ends=["spigot", "female-thread"])
    asm.attach("bushing", bushing, "A", to=("tee", "C"))

    for name in ("cap", "elbow", "bushing"):
        anchor = asm.world_anchor(name, "A")
        print(f"  {name:8s} A at ({anchor.position[0]:8.2f}, {anchor.position[1]:8.2f}, {anchor.position[2]:8.2f})")

    step_path = output_dir / "socket_manifold.step"
    asm.export(step_path)
    print(f"\nSTEP file written to: {step_path}")


if __name__ == "__main__":
    main()
