"""Shared test fixtures: a tiny labelled corpus of scientific abstracts."""

from __future__ import annotations

import pytest

ML_DOCS = [
    "Neural networks learn representations through gradient descent optimization.",
    "We train a deep neural network classifier with stochastic gradient descent.",
    "Support vector machines and kernel methods for supervised classification.",
    "Reinforcement learning agents optimize reward with policy gradient methods.",
    "Regularization reduces overfitting when training neural network models.",
    "Decision trees and random forests for supervised learning on tabular data.",
    "Gradient boosting ensembles improve classifier accuracy on benchmark datasets.",
    "Transformer networks learn attention weights for sequence classification.",
]

BIO_DOCS = [
    "Gene expression in yeast cells is regulated by transcription factors.",
    "Protein folding and enzyme kinetics in bacterial cells.",
    "DNA sequencing reveals mutations in the genome of cancer cells.",
    "Cell division and mitosis are controlled by regulatory proteins.",
    "Transcription of genes in mammalian cells depends on chromatin structure.",
    "Bacterial populations evolve antibiotic resistance through gene mutations.",
    "Enzyme activity in mitochondria regulates cellular metabolism.",
    "Genome editing with CRISPR alters protein expression in plant cells.",
]

PSY_DOCS = [
    "Participants reported anxiety and mood symptoms in a cognitive survey.",
    "Cognitive behavioral therapy reduces depression symptoms in adolescents.",
    "Working memory and attention in children with learning difficulties.",
    "Personality traits predict emotional responses to social stress.",
    "Survey participants rated their emotional wellbeing and social anxiety.",
    "Attention and perception biases in patients with depression.",
    "Childhood memory and emotional development across adolescence.",
    "Social behavior and personality in a longitudinal cohort of participants.",
]


def _labelled(docs, label):
    return [(text, label) for text in docs]


@pytest.fixture
def train_corpus():
    """(texts, labels) with 6 documents per subject."""
    rows = (
        _labelled(ML_DOCS[:6], "Machine Learning")
        + _labelled(BIO_DOCS[:6], "Biology")
        + _labelled(PSY_DOCS[:6], "Psychology")
    )
    texts = [t for t, _ in rows]
    labels = [lbl for _, lbl in rows]
    return texts, labels


@pytest.fixture
def test_corpus():
    """(texts, labels) held out from training; includes an all-digit document."""
    rows = (
        _labelled(ML_DOCS[6:], "Machine Learning")
        + _labelled(BIO_DOCS[6:], "Biology")
        + _labelled(PSY_DOCS[6:], "Psychology")
    )
    texts = [t for t, _ in rows] + ["12, 34!"]
    labels = [lbl for _, lbl in rows] + ["Biology"]
    return texts, labels


@pytest.fixture
def corpus_csv(tmp_path):
    """A raw corpus CSV with the default column names."""
    lines = ["Id,Text,Label"]
    docs = (
        _labelled(ML_DOCS, "Machine Learning")
        + _labelled(BIO_DOCS, "Biology")
        + _labelled(PSY_DOCS, "Psychology")
    )
    for i, (text, label) in enumerate(docs):
        lines.append(f'{i},"{text}",{label}')
    path = tmp_path / "corpus.csv"
    path.write_text("\n".join(lines), encoding="utf-8")
    return path
