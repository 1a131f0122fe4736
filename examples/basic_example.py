"""
Tucker3 Basic Example

This script demonstrates the basic usage of the Tucker3 package for
tensor decomposition and the operations on a decomposition.
"""

import time

import numpy as np

import tucker3

# Set random seed for reproducibility
np.random.seed(42)


def main():
    # Create a low-rank tensor with some noise
    print("Creating test tensor...")
    tensor_shape = (16, 12, 8)
    ranks = (4, 4, 3)
    core = np.random.rand(*ranks)
    bases = [np.linalg.qr(np.random.rand(n, r))[0] for n, r in zip(tensor_shape, ranks)]
    tensor = tucker3.reconstruct(core, bases).array + 1e-3 * np.random.rand(*tensor_shape)

    print(f"Tensor shape: {tensor.shape}")
    print(f"Tensor size: {tensor.size} elements")
    print(f"Memory usage: {tensor.nbytes / 1024:.2f} KB")

    # Decompose with HOSVD initialization and HOOI refinement
    print("\nDecomposing...")
    tucker = tucker3.Tucker3Tensor(ranks, tensor_shape)
    start_time = time.time()
    tucker.decomposition(tensor)
    print(f"Decomposition time: {time.time() - start_time:.4f} seconds")
    print(f"HOOI iterations: {tucker.iterations}")
    print(f"Approximation norms: {tucker.norm_history}")

    # Reconstruct and check error
    print("\nReconstructing tensor...")
    print(f"Relative reconstruction error: {tucker.error(tensor, relative=True):.8e}")
    print(f"Compression Ratio: {tucker.compression_ratio:.2f}x")

    # Lower the ranks without recomputing
    reduced = tucker3.Tucker3Tensor((2, 2, 2), tensor_shape)
    reduced.reduce_ranks(tucker)
    print(f"\nRank (2, 2, 2) relative error: {reduced.error(tensor, relative=True):.8e}")

    # Half resolution approximation
    half = tucker3.Tucker3Tensor(ranks, (8, 6, 4))
    half.subsampling(tucker, 2)
    subsampled = tensor[::2, ::2, ::2]
    print(f"Subsampled relative error: {half.error(subsampled, relative=True):.8e}")

    # Flat buffer round trip
    buffer = tucker.export_to()
    copy = tucker3.Tucker3Tensor(ranks, tensor_shape)
    copy.import_from(buffer)
    print(f"\nExported {len(buffer)} values, import matches: "
          f"{np.allclose(copy.reconstruction().array, tucker.reconstruction().array)}")


if __name__ == "__main__":
    main()
