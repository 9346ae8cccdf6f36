"""
Seed data - Starter articles in every supported locale
"""
import logging
from typing import Dict, Optional

from ..model.article_model import ArticleModel, DuplicateArticleError

logger = logging.getLogger(__name__)

SEED_ARTICLES = [
    {
        'slug': 'axiomverse-layerblog',
        'locale': 'en',
        'title': 'AxiomVerse & LayerBlog: Redefining Digital Experiences',
        'description': 'Revolutionary approaches to content and decentralized networks '
                       'using quantum-inspired technologies',
        'date': '2025-04-15',
        'image': '/images/axiomverse-banner.jpg',
        'tags': ['Blockchain', 'Quantum Computing', 'LayerBlog'],
        'body': """Digital experiences are evolving beyond traditional paradigms, requiring new
frameworks for data management, security, and content presentation.

## AxiomVerse: Beyond Traditional Blockchain

Unlike traditional blockchain's linear blocks, AxiomVerse utilizes *axioms*:
multi-dimensional data structures designed to manage intricate transactions
and metadata with greater precision.

- Each axiom contains multiple layers of data with different access permissions
- Enhanced capacity for storing complex transaction metadata
- Native representation of complex assets

<Callout type="tip">
LayerBlog organizes content into layers that readers navigate based on their
interest and available time.
</Callout>
""",
    },
    {
        'slug': 'axiomverse-layerblog',
        'locale': 'fr',
        'title': 'AxiomVerse et LayerBlog : redéfinir les expériences numériques',
        'description': 'Des approches novatrices du contenu et des réseaux décentralisés '
                       'inspirées du quantique',
        'date': '2025-04-15',
        'image': '/images/axiomverse-banner.jpg',
        'tags': ['Blockchain', 'Quantum Computing', 'LayerBlog'],
        'body': """Les expériences numériques dépassent les paradigmes traditionnels et exigent
de nouveaux cadres pour la gestion des données, la sécurité et la présentation du contenu.

## AxiomVerse : au-delà de la blockchain traditionnelle

Plutôt que des blocs linéaires, AxiomVerse utilise des *axiomes* : des structures de
données multidimensionnelles conçues pour gérer des transactions complexes.

<Callout type="tip">
LayerBlog organise le contenu en couches que les lecteurs parcourent selon leur
intérêt et leur temps disponible.
</Callout>
""",
    },
    {
        'slug': 'layerblog-platform',
        'locale': 'en',
        'title': 'LayerBlog: Next-Generation Blogging Platform',
        'description': 'A multi-layered approach to content with integrated, contextual reader engagement',
        'date': '2025-04-20',
        'tags': ['UI/UX', 'Content Strategy', 'LayerBlog'],
        'body': """LayerBlog rethinks content creation through progressive depth and contextual
engagement.

## <Translate key="Blog.readMore" />

1. **Dynamic content layers**: content organized in progressive depth levels
2. **Contextual engagement**: readers interact with specific passages
3. **Visual engagement indicators**: real-time feedback on what resonates

### Text-level appreciation

Readers can *clap* for the passages they find valuable, and leave inline
annotations tied to the exact text they are reading.
""",
    },
    {
        'slug': 'layerblog-platform',
        'locale': 'fr',
        'title': 'LayerBlog : la plateforme de blog nouvelle génération',
        'description': 'Une approche du contenu en couches avec un engagement contextuel des lecteurs',
        'date': '2025-04-20',
        'tags': ['UI/UX', 'Content Strategy', 'LayerBlog'],
        'body': """LayerBlog repense la création de contenu grâce à la profondeur progressive et
à l'engagement contextuel.

1. **Couches de contenu dynamiques** : un contenu organisé par niveaux de profondeur
2. **Engagement contextuel** : les lecteurs interagissent avec des passages précis
3. **Indicateurs visuels** : un retour en temps réel sur ce qui résonne

Les lecteurs peuvent *applaudir* les passages qu'ils apprécient et laisser des
annotations directement dans le texte.
""",
    },
]


def seed_database(article_model: Optional[ArticleModel] = None) -> Dict[str, int]:
    """
    Insert the starter articles, skipping any slug/locale that already exists.

    Returns:
        Counts of created and skipped articles
    """
    article_model = article_model or ArticleModel()
    stats = {'created': 0, 'skipped': 0}

    logger.info("Starting database seeding...")
    for data in SEED_ARTICLES:
        try:
            article_model.create_article(data)
            stats['created'] += 1
        except DuplicateArticleError:
            logger.info(f"Article {data['slug']} ({data['locale']}) already exists, skipping")
            stats['skipped'] += 1

    logger.info(f"Seeding complete: {stats['created']} created, {stats['skipped']} skipped")
    return stats
