# -- Neighbor Search -- #

'''
Neighbor pair construction for the SPH passes.

Every SPH sum in this solver runs over "all particles", but each kernel
vanishes beyond the support radius h, so only pairs within h
contribute. A neighbor search returns that pair set once per tick:
every ordered pair (i, j) with |x_i - x_j| <= h, including the self
pair (i, i).

Three interchangeable searches are provided:

- BruteForceSearch: all-pairs distance test, O(N^2). The reference.
- SpatialHashGrid: cell-linked list with cells of size h, O(N).
- KdTreeSearch: scipy cKDTree radius query.

All three only *propose* candidate pairs; the final distance test,
self pairs, and the pair ordering (by target index, then neighbor
index) are applied by one shared routine. The accelerated searches
therefore produce the exact same pair arrays as brute force, and every
downstream sum is bit-identical whichever search is used.

References:
-----------
Ihmsen et al. (2011) -- Parallel Neighbor-Search for SPH
Green (2010) -- Particle Simulation using CUDA

Sean Bowman [10/17/2026]
'''

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import numpy as np
from scipy.spatial import cKDTree


# Relative padding on the candidate radius; the exact test is applied
# afterwards, so candidates only need to be a superset
_CANDIDATE_PADDING = 1e-9


######################################################################
# -- Neighbor Pairs -- #
######################################################################

@dataclass(frozen=True)
class NeighborPairs:
    '''
    Ordered neighbor pairs and their geometry for one tick.

    Pairs are sorted by target index i, then neighbor index j, and
    include the self pair (i, i) for every particle.

    Parameters:
    -----------
    iIdx : np.ndarray
        Target particle index per pair, shape (M,)
    jIdx : np.ndarray
        Neighbor particle index per pair, shape (M,)
    displacements : np.ndarray
        x_i - x_j per pair, shape (M, 3)
    distances : np.ndarray
        |x_i - x_j| per pair, shape (M,)
    directions : np.ndarray
        Unit vectors of displacements, zero where the distance is
        zero, shape (M, 3)
    nParticles : int
        Size of the particle set the pairs index into
    '''

    iIdx: np.ndarray
    jIdx: np.ndarray
    displacements: np.ndarray
    distances: np.ndarray
    directions: np.ndarray
    nParticles: int

    @property
    def nPairs(self) -> int:
        '''Number of ordered pairs (self pairs included).'''
        return len(self.iIdx)

    def neighborCounts(self) -> np.ndarray:
        '''Number of neighbors within h per particle, self included.'''
        return np.bincount(self.iIdx, minlength=self.nParticles)

    def sumPerParticle(self, values: np.ndarray) -> np.ndarray:
        '''
        Sum pair values onto their target particles.

        Accumulates in pair order, so the result only depends on the
        pair set, not on how it was found.

        Parameters:
        -----------
        values : np.ndarray
            Per-pair values, shape (M,) or (M, 3)

        Returns:
        --------
        np.ndarray : Per-particle sums, shape (N,) or (N, 3)
        '''
        result = np.zeros((self.nParticles,) + values.shape[1:])
        np.add.at(result, self.iIdx, values)
        return result

    @classmethod
    def fromCandidates(
        cls,
        positions: np.ndarray,
        iCandidates: np.ndarray,
        jCandidates: np.ndarray,
        radius: float,
    ) -> NeighborPairs:
        '''
        Build the final pair set from unordered candidate pairs.

        Applies the exact distance test |x_i - x_j| <= radius, mirrors
        each accepted pair to both orders, adds the self pairs, and
        sorts by (i, j).

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions, shape (N, 3)
        iCandidates, jCandidates : np.ndarray
            Candidate pairs with i < j, shape (K,)
        radius : float
            Support radius h

        Returns:
        --------
        NeighborPairs : Final, ordered pair set
        '''
        n = positions.shape[0]
        iCandidates = np.asarray(iCandidates, dtype=np.int64)
        jCandidates = np.asarray(jCandidates, dtype=np.int64)

        dist = np.linalg.norm(positions[iCandidates] - positions[jCandidates], axis=1)
        within = dist <= radius
        iKept = iCandidates[within]
        jKept = jCandidates[within]

        selfIdx = np.arange(n, dtype=np.int64)
        iAll = np.concatenate([iKept, jKept, selfIdx])
        jAll = np.concatenate([jKept, iKept, selfIdx])

        order = np.lexsort((jAll, iAll))
        iAll = iAll[order]
        jAll = jAll[order]

        displacements = positions[iAll] - positions[jAll]
        distances = np.linalg.norm(displacements, axis=1)

        # Zero-length displacement normalizes to the zero vector
        safeDistances = np.where(distances > 0.0, distances, 1.0)
        directions = displacements / safeDistances[:, np.newaxis]
        directions[distances == 0.0] = 0.0

        return cls(
            iIdx=iAll,
            jIdx=jAll,
            displacements=displacements,
            distances=distances,
            directions=directions,
            nParticles=n,
        )


######################################################################
# -- Neighbor Search Protocol -- #
######################################################################

class NeighborSearch(Protocol):
    '''Protocol for neighbor search algorithms.'''

    def findPairs(self, positions: np.ndarray, radius: float) -> NeighborPairs:
        '''
        Find all ordered particle pairs within the given radius.

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions, shape (N, 3)
        radius : float
            Support radius h

        Returns:
        --------
        NeighborPairs : Pair set including self pairs
        '''
        ...


######################################################################
# -- Brute Force -- #
######################################################################

class BruteForceSearch:
    '''
    All-pairs neighbor search.

    Tests every unordered pair, processed in row blocks to bound the
    temporary memory at blockSize * N distances.

    Parameters:
    -----------
    blockSize : int
        Rows of the pair matrix processed at once
    '''

    def __init__(self, blockSize: int = 256) -> None:
        self._blockSize = blockSize

    def findPairs(self, positions: np.ndarray, radius: float) -> NeighborPairs:
        '''Find all ordered pairs within radius by testing every pair.'''
        n = positions.shape[0]
        iChunks: list[np.ndarray] = []
        jChunks: list[np.ndarray] = []

        for start in range(0, n, self._blockSize):
            stop = min(start + self._blockSize, n)
            rows = np.arange(start, stop)

            # (block, N) distances, upper triangle only
            diff = positions[rows, np.newaxis, :] - positions[np.newaxis, :, :]
            dist = np.sqrt(np.sum(diff * diff, axis=2))
            upper = rows[:, np.newaxis] < np.arange(n)[np.newaxis, :]
            padded = radius * (1.0 + _CANDIDATE_PADDING)
            localI, globalJ = np.nonzero(upper & (dist <= padded))

            iChunks.append(rows[localI])
            jChunks.append(globalJ)

        return NeighborPairs.fromCandidates(
            positions, np.concatenate(iChunks), np.concatenate(jChunks), radius,
        )


######################################################################
# -- Spatial Hash Grid -- #
######################################################################

class SpatialHashGrid:
    '''
    Uniform grid spatial hashing for 3D neighbor search.

    Cell size equals the (padded) support radius, so every neighbor
    of a particle lies in its own cell or one of the 26 adjacent cells.
    A half stencil of 13 offsets visits each cell pair once.

    Distance checks are vectorized per cell-pair group using NumPy
    broadcasting.
    '''

    def __init__(self) -> None:
        self._halfStencil = self._computeHalfStencil()

    def findPairs(self, positions: np.ndarray, radius: float) -> NeighborPairs:
        '''Find all ordered pairs within radius using a cell grid.'''
        padded = radius * (1.0 + _CANDIDATE_PADDING)
        cells = self._binParticles(positions, padded)
        paddedSq = padded * padded

        iChunks: list[np.ndarray] = [np.array([], dtype=np.int64)]
        jChunks: list[np.ndarray] = [np.array([], dtype=np.int64)]

        for cellKey, cellParticles in cells.items():
            cellPos = positions[cellParticles]

            # --- Pairs within the same cell --- #
            nCell = len(cellParticles)
            if nCell > 1:
                rowIdx, colIdx = np.triu_indices(nCell, k=1)
                diff = cellPos[rowIdx] - cellPos[colIdx]
                within = np.sum(diff * diff, axis=1) <= paddedSq
                iChunks.append(cellParticles[rowIdx[within]])
                jChunks.append(cellParticles[colIdx[within]])

            # --- Pairs with neighbor cells (half stencil) --- #
            for offset in self._halfStencil:
                neighborKey = (cellKey[0] + offset[0], cellKey[1] + offset[1], cellKey[2] + offset[2])
                neighborParticles = cells.get(neighborKey)
                if neighborParticles is None:
                    continue

                neighborPos = positions[neighborParticles]
                diff = cellPos[:, np.newaxis, :] - neighborPos[np.newaxis, :, :]
                localI, localJ = np.nonzero(np.sum(diff * diff, axis=2) <= paddedSq)
                if len(localI) > 0:
                    iChunks.append(cellParticles[localI])
                    jChunks.append(neighborParticles[localJ])

        iAll = np.concatenate(iChunks)
        jAll = np.concatenate(jChunks)

        # Orient every candidate as i < j
        iOrdered = np.minimum(iAll, jAll)
        jOrdered = np.maximum(iAll, jAll)

        return NeighborPairs.fromCandidates(positions, iOrdered, jOrdered, radius)

    @staticmethod
    def _binParticles(positions: np.ndarray, cellSize: float) -> dict[tuple, np.ndarray]:
        '''
        Bin particle indices by integer cell coordinates.

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions, shape (N, 3)
        cellSize : float
            Grid cell edge length

        Returns:
        --------
        dict[tuple, np.ndarray] : Cell key -> particle indices
        '''
        cellIndices = np.floor(positions / cellSize).astype(np.int64)

        cellDict: dict[tuple, list[int]] = {}
        for i in range(len(positions)):
            key = tuple(cellIndices[i])
            if key not in cellDict:
                cellDict[key] = []
            cellDict[key].append(i)

        return {k: np.array(v, dtype=np.int64) for k, v in cellDict.items()}

    @staticmethod
    def _computeHalfStencil() -> list[tuple[int, int, int]]:
        '''
        Neighbor cell offsets that visit each cell pair once.

        Keeps the 13 offsets of the 3x3x3 stencil that come after
        (0, 0, 0) in lexicographic order.

        Returns:
        --------
        list[tuple[int, int, int]] : Half-stencil offsets
        '''
        offsets = []
        for dx in range(-1, 2):
            for dy in range(-1, 2):
                for dz in range(-1, 2):
                    if (dx, dy, dz) > (0, 0, 0):
                        offsets.append((dx, dy, dz))
        return offsets


######################################################################
# -- k-d Tree -- #
######################################################################

class KdTreeSearch:
    '''
    Neighbor search using scipy's cKDTree radius query.

    query_pairs returns each unordered pair within the radius once,
    with i < j.
    '''

    def findPairs(self, positions: np.ndarray, radius: float) -> NeighborPairs:
        '''Find all ordered pairs within radius using a k-d tree.'''
        tree = cKDTree(positions)
        candidates = tree.query_pairs(r=radius * (1.0 + _CANDIDATE_PADDING), output_type='ndarray')
        if len(candidates) == 0:
            candidates = np.zeros((0, 2), dtype=np.int64)
        return NeighborPairs.fromCandidates(positions, candidates[:, 0], candidates[:, 1], radius)


######################################################################
# -- Factory -- #
######################################################################

def createNeighborSearch(searchType: str) -> NeighborSearch:
    '''
    Create a neighbor search by type name.

    Parameters:
    -----------
    searchType : str
        'bruteForce', 'hashGrid', or 'kdTree'

    Returns:
    --------
    NeighborSearch : Search instance

    Raises:
    -------
    ValueError : If the search type is unknown
    '''
    if searchType == 'bruteForce':
        return BruteForceSearch()
    elif searchType == 'hashGrid':
        return SpatialHashGrid()
    elif searchType == 'kdTree':
        return KdTreeSearch()
    else:
        raise ValueError(f'Unknown neighbor search: {searchType}')
