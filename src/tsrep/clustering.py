# -*- coding: utf-8 -*-
"""Partition-based clustering of period vectors."""

from __future__ import annotations

import logging
import warnings

import numpy as np
from scipy.spatial.distance import cdist
from sklearn.base import BaseEstimator, ClusterMixin
from sklearn.metrics.pairwise import pairwise_distances
from sklearn.utils import check_array

from tsrep.config import DISTANCE_METRICS, REPRESENTATION_METHODS
from tsrep.exceptions import ConfigurationError, ConvergenceWarning, DataError

logger = logging.getLogger(__name__)


class KMedoids(BaseEstimator, ClusterMixin):
    """
    Deterministic k-medoids class.

    Alternates between assigning every candidate to its nearest center and
    moving each center to the medoid (or mean) of its members until the
    assignment is stable.

    :param n_clusters: How many clusters. Must be positive. optional, default: 8
    :type n_clusters: integer

    :param distance_metric: What distance metric to use. Either one of the names in
        tsrep.config.DISTANCE_METRICS or a callable returning the pairwise distance
        matrix of two arrays. optional, default: 'euclidean'
    :type distance_metric: string or callable

    :param method: 'medoid' picks the member with the smallest summed distance to the
        other members, 'mean' uses the centroid. optional, default: 'medoid'
    :type method: string

    :param max_iter: Maximal number of assign/update iterations. optional, default: 300
    :type max_iter: integer

    :param random_state: Seed for the choice of the initial centers. optional, default: 0
    :type random_state: integer
    """

    def __init__(
        self,
        n_clusters=8,
        distance_metric="euclidean",
        method="medoid",
        max_iter=300,
        random_state=0,
    ):

        self.n_clusters = n_clusters

        self.distance_metric = distance_metric

        self.method = method

        self.max_iter = max_iter

        self.random_state = random_state

    def _check_init_args(self):

        # Check n_clusters
        if (
            self.n_clusters is None
            or isinstance(self.n_clusters, bool)
            or not isinstance(self.n_clusters, (int, np.integer))
            or self.n_clusters <= 0
        ):
            raise ConfigurationError(
                "n_clusters has to be a positive integer, got {!r}".format(self.n_clusters)
            )

        # Check distance_metric
        if callable(self.distance_metric):
            self.distance_func = self.distance_metric
        elif self.distance_metric == "cosine":
            # scikit-learn defines the distance of zero vectors
            self.distance_func = lambda X, Y=None: pairwise_distances(X, Y, metric="cosine")
        elif self.distance_metric in DISTANCE_METRICS:
            # differences first: equally distant centers get bitwise equal distances
            metric = self.distance_metric
            self.distance_func = lambda X, Y=None: cdist(X, X if Y is None else Y, metric=metric)
        else:
            raise ConfigurationError(
                "distance_metric needs to be "
                + "callable or one of the "
                + "following strings: "
                + "{}".format(list(DISTANCE_METRICS))
                + ". Instead, '{}' ".format(self.distance_metric)
                + "was given."
            )

        if self.method not in REPRESENTATION_METHODS:
            raise ConfigurationError(
                "method needs to be one of {}, got {!r}".format(
                    list(REPRESENTATION_METHODS), self.method
                )
            )

        if (
            isinstance(self.max_iter, bool)
            or not isinstance(self.max_iter, (int, np.integer))
            or self.max_iter < 1
        ):
            raise ConfigurationError(
                "max_iter has to be a positive integer, got {!r}".format(self.max_iter)
            )

    def _check_array(self, X):

        X = np.asarray(X, dtype=float)
        if X.ndim != 2:
            raise DataError("Expected a 2D array of candidates, got {}D".format(X.ndim))

        bad = ~np.isfinite(X)
        if bad.any():
            row, col = np.argwhere(bad)[0]
            raise DataError(
                "Candidate {} contains a non-finite value at position {}".format(row, col)
            )

        X = check_array(X)

        # Check that the number of clusters is less than or equal to
        # the number of samples
        if self.n_clusters > X.shape[0]:
            raise ConfigurationError(
                "The number of clusters "
                + "({}) ".format(self.n_clusters)
                + "must not be larger than the number "
                + "of samples ({})".format(X.shape[0])
            )

        return X

    def fit(self, X, y=None):
        """Fit K-Medoids to the provided data.

        :param X: shape=(n_samples, n_features)
        :type X: array-like

        :returns: self
        """

        self._check_init_args()

        X = self._check_array(X)
        n_samples = X.shape[0]
        k = int(self.n_clusters)

        # the medoid variant only ever needs distances between candidates
        D = self.distance_func(X) if self.method == "medoid" else None

        rnd = np.random.RandomState(self.random_state)
        center_idx = np.sort(rnd.choice(n_samples, size=k, replace=False))
        centers = X[center_idx].copy()

        labels = None
        converged = False
        for n_iter in range(1, self.max_iter + 1):
            if D is not None:
                distances = D[:, center_idx]
            else:
                distances = self.distance_func(X, centers)

            # np.argmin returns the first minimum: ties go to the lowest center index
            new_labels = np.argmin(distances, axis=1)
            new_labels, center_idx, centers = self._fill_empty_clusters(
                X, distances, new_labels, center_idx, centers
            )

            if labels is not None and np.array_equal(new_labels, labels):
                converged = True
                break
            labels = new_labels

            center_idx, centers = self._update_centers(X, D, labels, k)
            logger.debug("k-medoids iteration %d finished", n_iter)

        if not converged:
            warnings.warn(
                "Clustering did not converge within {} iterations. ".format(self.max_iter)
                + "The last assignment is returned.",
                ConvergenceWarning,
            )

        labels, center_idx, centers = self._relabel(labels, center_idx, centers, k)

        if D is not None:
            inertia = float(D[np.arange(n_samples), center_idx[labels]].sum())
        else:
            inertia = float(
                self.distance_func(X, centers)[np.arange(n_samples), labels].sum()
            )

        self.labels_ = labels
        self.cluster_centers_ = centers
        self.medoid_indices_ = center_idx if self.method == "medoid" else None
        self.inertia_ = inertia
        self.n_iter_ = n_iter
        self.converged_ = converged

        return self

    def fit_predict(self, X, y=None):
        return self.fit(X).labels_

    def _fill_empty_clusters(self, X, distances, labels, center_idx, centers):
        """Moves the farthest candidate of a multi-member cluster into every empty cluster."""
        k = len(centers)
        labels = labels.copy()
        center_idx = center_idx.copy()
        centers = centers.copy()
        own_distance = distances[np.arange(len(labels)), labels].copy()

        for cluster in range(k):
            counts = np.bincount(labels, minlength=k)
            if counts[cluster] > 0:
                continue
            # only candidates whose cluster keeps at least one member
            movable = counts[labels] > 1
            candidate_distance = np.where(movable, own_distance, -np.inf)
            # np.argmax returns the first maximum: ties go to the lowest index
            idx = int(np.argmax(candidate_distance))
            logger.debug("Re-seeding empty cluster %d with candidate %d", cluster, idx)
            labels[idx] = cluster
            own_distance[idx] = 0.0
            center_idx[cluster] = idx
            centers[cluster] = X[idx]

        return labels, center_idx, centers

    def _update_centers(self, X, D, labels, k):
        center_idx = np.empty(k, dtype=int)
        centers = np.empty((k, X.shape[1]))
        for cluster in range(k):
            members = np.flatnonzero(labels == cluster)
            if self.method == "medoid":
                innerDistMatrix = D[np.ix_(members, members)]
                mindistIdx = np.argmin(innerDistMatrix.sum(axis=0))
                center_idx[cluster] = members[mindistIdx]
                centers[cluster] = X[members[mindistIdx]]
            else:
                center_idx[cluster] = members[0]
                centers[cluster] = X[members].mean(axis=0)
        return center_idx, centers

    @staticmethod
    def _relabel(labels, center_idx, centers, k):
        """Numbers the clusters by the index of their first member."""
        _, first_seen = np.unique(labels, return_index=True)
        order = np.argsort(first_seen, kind="stable")
        translator = np.empty(k, dtype=int)
        translator[order] = np.arange(k)
        return translator[labels], center_idx[order], centers[order]
