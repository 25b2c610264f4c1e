import os
from datetime import datetime

import bleach
import markdown
from flask import Flask, abort, render_template

app = Flask(__name__)
ARTICLES_DIR = os.path.join(os.path.dirname(__file__), 'articles')
BASE_PATH = os.environ.get('BASE_PATH', '')

ALLOWED_TAGS = [
    'p', 'h1', 'h2', 'h3', 'h4', 'strong', 'em',
    'ul', 'ol', 'li', 'blockquote', 'code', 'pre',
    'table', 'thead', 'tbody', 'tr', 'th', 'td', 'a',
]
ALLOWED_ATTRS = {
    'a': ['href', 'title'],
    'code': ['class'],
    'pre': ['class'],
}


def get_categories():
    """Returns a list of category names based on subdirectories in ARTICLES_DIR."""
    if not os.path.exists(ARTICLES_DIR):
        return []
    return sorted(d for d in os.listdir(ARTICLES_DIR)
                  if os.path.isdir(os.path.join(ARTICLES_DIR, d)) and not d.startswith('.'))


def get_article_metadata(category, filename):
    """Parses markdown file metadata."""
    with open(os.path.join(ARTICLES_DIR, category, filename), encoding='utf-8') as f:
        md = markdown.Markdown(extensions=['meta'])
        md.convert(f.read())

    slug = filename[:-len('.md')]
    date_str = md.Meta.get('date', [''])[0]
    date_obj = None
    if date_str:
        try:
            date_obj = datetime.strptime(date_str, '%Y-%m-%d')
        except ValueError:
            pass
    return {
        'title': md.Meta.get('title', [slug.replace('-', ' ').title()])[0],
        'date': date_str,
        'date_obj': date_obj,
        'category': category,
        'slug': slug,
    }


def get_articles_in_category(category):
    """Returns the articles of a category, newest first."""
    cat_dir = os.path.join(ARTICLES_DIR, category)
    if not os.path.isdir(cat_dir):
        return []
    articles = [get_article_metadata(category, f) for f in os.listdir(cat_dir) if f.endswith('.md')]
    articles.sort(key=lambda a: a['date_obj'] or datetime.min, reverse=True)
    return articles


@app.context_processor
def inject_categories():
    return dict(categories=get_categories(), base_path=BASE_PATH)


@app.route('/')
def home():
    articles = [a for cat in get_categories() for a in get_articles_in_category(cat)]
    return render_template('index.html', articles=articles)


@app.route('/hello')
def hello():
    return render_template('hello.html')


@app.route('/<category>/')
def category_page(category):
    if category not in get_categories():
        abort(404)
    return render_template('category.html', category=category,
                           articles=get_articles_in_category(category))


@app.route('/<category>/<slug>')
def article_page(category, slug):
    if category not in get_categories() or not slug or '..' in slug or slug.startswith('.'):
        abort(404)
    filepath = os.path.join(ARTICLES_DIR, category, slug + '.md')
    if not os.path.exists(filepath):
        abort(404)

    with open(filepath, encoding='utf-8') as f:
        md = markdown.Markdown(extensions=['meta', 'fenced_code', 'tables'])
        html = md.convert(f.read())
    content = bleach.clean(html, tags=ALLOWED_TAGS, attributes=ALLOWED_ATTRS, strip=True)
    title = md.Meta.get('title', [slug.replace('-', ' ').title()])[0]
    return render_template('article.html', content=content, title=title, category=category)


if __name__ == '__main__':
    app.run(debug=True, port=3000)
