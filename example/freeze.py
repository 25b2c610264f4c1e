import logging
import os

from site_freezer import Freezer

from app import app, get_articles_in_category, get_categories

app.config['FREEZER_DESTINATION'] = os.environ.get('FREEZER_DESTINATION', 'build')
# One endpoint serves every article, so remember them by slug as well.
app.config['FREEZER_DEDUP_ROUTES_BY_PARAMS'] = True

freezer = Freezer(app)


@freezer.register_generator(priority=50)
def category_page():
    for cat in get_categories():
        yield 'category_page', {'category': cat}


@freezer.register_generator(priority=80)
def article_page():
    for cat in get_categories():
        for art in get_articles_in_category(cat):
            yield 'article_page', {'category': cat, 'slug': art['slug']}


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(message)s')
    freezer.freeze()
