"""
Selector catalogs used by the extraction heuristics and the click pagination pipeline.

These are plain configuration tables. Cascades are tried in order; the first
selector that yields usable content wins unless the heuristic says otherwise.
"""

import re

# =============================================================================
# Shared element groups
# =============================================================================

TEXT_BLOCK_SELECTOR = "p, h1, h2, h3, h4, h5, h6, ul, ol, blockquote"

RICH_TEXT_SELECTOR = "p, h1, h2, h3, h4, h5, h6, li, blockquote, figcaption, code, pre"

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")

SECTION_HEADING_TAGS = ("h2", "h3", "h4", "h5", "h6")

# id/class fragments that mark navigation chrome rather than content
NON_CONTENT_PATTERN = re.compile(r"nav|menu|sidebar|footer|header", re.IGNORECASE)

# =============================================================================
# Generic heuristics
# =============================================================================

MAIN_CONTENT_SELECTOR = (
    'main, [role="main"], #main, .main, .content, #content, .post-content, .article-content'
)

SEMANTIC_SELECTORS = (
    # ARIA roles
    '[role="article"]',
    '[role="main"]',
    '[role="contentinfo"]',
    '[role="document"]',
    '[role="region"]',
    # Schema.org
    '[itemtype*="Article"]',
    '[itemtype*="NewsArticle"]',
    '[itemtype*="BlogPosting"]',
    '[itemtype*="WebPage"]',
    '[itemtype*="CreativeWork"]',
    # HTML5 sections
    "article",
    "section",
    # OpenGraph
    '[property="og:description"]',
    # Common content classes
    ".post-content",
    ".entry-content",
    ".article-content",
    ".blog-content",
    ".story-content",
    ".page-content",
)

HEADER_FOOTER_SKIP_SELECTOR = "nav, aside, .sidebar, .ad, .advertisement"

COLUMN_SELECTOR = '.column, .col, [class*="col-"], [class*="column-"]'

SECTION_SELECTOR = 'section, .section, [role="region"], [role="contentinfo"]'

SINGLE_COLUMN_SELECTOR = (
    ".content, #content, .post-content, .entry-content, .site-content, .page-content, .single-content"
)

SINGLE_COLUMN_EXCLUDED_ANCESTORS = "header, footer, aside, nav, .sidebar, .navigation"

LARGEST_CANDIDATE_SELECTOR = "div, section, main, article"

LARGEST_EXCLUDED_SELECTOR = "nav, header, footer, aside, .sidebar, .ad, .advertisement, .menu"

BASIC_SELECTOR = (
    "p, h1, h2, h3, h4, h5, h6, ul, ol, blockquote, div > span, div, section, article"
)

DENSITY_CONTAINER_SELECTOR = "div, section, main, article"

# =============================================================================
# Recipe cascades
# =============================================================================

RECIPE_CONTAINER_SELECTORS = (
    ".recipe",
    ".recipe-container",
    ".recipe-card",
    ".recipe-content",
    ".recipe-body",
    ".recipe-main",
    '[itemtype*="Recipe"]',
    '[typeof*="Recipe"]',
    "article",
    "main",
    "#content",
    ".content",
    ".post-content",
    ".entry-content",
)

INGREDIENT_SELECTORS = (
    '[itemprop="recipeIngredient"]',
    ".ingredients li",
    ".ingredient-list li",
    ".recipe-ingredients li",
    '[class*="ingredient"] li',
    '[id*="ingredient"] li',
    "ul li",
)

INSTRUCTION_SELECTORS = (
    '[itemprop="recipeInstructions"] li',
    ".instructions li",
    ".recipe-instructions li",
    ".steps li",
    ".method li",
    ".directions li",
    '[class*="instruction"] li',
    '[id*="instruction"] li',
    '[class*="direction"] li',
    '[id*="direction"] li',
    '[class*="step"] li',
    '[id*="step"] li',
    "ol li",
)

INSTRUCTION_CONTAINER_SELECTORS = (
    '[itemprop="recipeInstructions"]',
    ".instructions",
    ".recipe-instructions",
    ".steps",
    ".method",
    ".directions",
    '[class*="instruction"]',
    '[id*="instruction"]',
    '[class*="direction"]',
    '[id*="direction"]',
    '[class*="step"]',
    '[id*="step"]',
)

INGREDIENT_HEADING_PATTERN = re.compile(r"ingredient", re.IGNORECASE)

INSTRUCTION_HEADING_PATTERN = re.compile(
    r"instruction|direction|method|step|preparation", re.IGNORECASE
)

MEASUREMENT_PATTERN = re.compile(
    r"\d+\s*(cup|tbsp|tsp|tablespoon|teaspoon|oz|ounce|pound|lb|gram|g|ml|l)", re.IGNORECASE
)

NUMBERED_STEP_PATTERN = re.compile(r"^\d+[.)]")

# =============================================================================
# Product cascades
# =============================================================================

PRODUCT_TITLE_SELECTORS = (
    '[itemprop="name"]',
    ".product-title",
    ".product-name",
    ".product__title",
    "h1.title",
    '[data-testid="product-title"]',
    ".pdp-title",
    "h1",
    "#productTitle",
)

PRODUCT_PRICE_SELECTORS = (
    '[itemprop="price"]',
    ".price",
    ".product-price",
    ".product__price",
    '[data-testid="price"]',
    ".pdp-price",
    ".current-price",
    "#priceblock_ourprice",
    ".price-characteristic",
)

PRODUCT_DESCRIPTION_SELECTORS = (
    '[itemprop="description"]',
    ".product-description",
    ".description",
    ".product__description",
    "#description",
    ".pdp-description",
    '[data-testid="product-description"]',
    "#productDescription",
    '[data-component-type="s-product-description"]',
)

PRODUCT_FEATURE_SELECTORS = (
    ".product-features",
    ".features",
    ".specifications",
    ".specs",
    ".product-specs",
    ".tech-specs",
    '[data-testid="product-specs"]',
    "#feature-bullets",
    ".product-attributes",
    ".accordion-inner",
)

PRODUCT_CONTAINER_SELECTOR = (
    '.product-details, .product-info, [class*="product-"], [class*="pdp-"], [id*="product-"]'
)

# Hostname substring -> site-specific selectors, tried before the generic cascade
PRODUCT_HOST_OVERRIDES: dict[str, dict[str, tuple[str, ...] | str]] = {
    "rei.com": {
        "title": ('[data-ui="product-title"]', "h1"),
        "brand": ('[data-ui="product-brand"]',),
        "price": ('[data-ui="sale-price"]', '[data-ui="display-price"]'),
        "description": (".product-information-container",),
        "spec_sections": ".pdp-accordion-content",
    },
}

PRODUCT_STRUCTURE_INDICATORS = (
    # Price
    ".price",
    '[itemprop="price"]',
    '[itemprop="offers"]',
    ".product-price",
    ".product__price",
    "#priceblock_ourprice",
    '[data-automation-id="price"]',
    # Buy buttons
    ".add-to-cart",
    ".buy-now",
    ".add-to-bag",
    "[data-add-to-cart]",
    ".product-form__cart-submit",
    "#add-to-cart",
    "#buy-now",
    ".buyBox",
    'button[data-ux-id*="add-to-cart"]',
    '[data-id="buybox"]',
    # Schema
    '[itemtype*="Product"]',
    '[typeof*="Product"]',
    # Galleries
    ".product-gallery",
    ".product-images",
    ".product-thumbnails",
    '[data-component-type="image-gallery"]',
    '[data-testid="product-gallery"]',
    '[data-id="image-gallery"]',
    '[data-ui="image-viewer"]',
    # Product details
    ".product-details",
    ".product-info",
    ".product-description",
    ".product-features",
    ".product-options",
    ".variant-selector",
    ".pdp-accordion-content",
    ".product-title-container",
    '[data-ui="product-title"]',
    '[data-id="purchase-buttons"]',
)

# Fragments of indicator selectors that are conclusive on their own
PRODUCT_STRONG_INDICATOR_MARKERS = (
    "add-to-cart",
    "buy-now",
    "product-gallery",
    "image-gallery",
    "product-title",
)

PRODUCT_URL_PATTERNS = ("/product/", "/products/", "/item/", "/dp/", "/shop/", "/buy/", "/pd/")

PRICE_TEXT_PATTERN = re.compile(r"\$\d+(\.\d{2})?|\d+\.\d{2}\s*USD|€\d+(\.\d{2})?|£\d+(\.\d{2})?")

# =============================================================================
# Documentation cascades
# =============================================================================

DOCUMENTATION_SELECTORS = (
    ".documentation",
    ".docs",
    ".doc-content",
    ".article__content",
    ".article-content",
    ".documentation__main",
    ".documentation__content",
    ".markdown-body",
    ".markdown-section",
    ".main-content",
    ".content-with-sidebar",
)

DOCUMENTATION_BLOCK_TAGS = ("p", "ul", "ol", "pre", "code", "dl", "table")

DOCUMENTATION_FALLBACK_CONTAINER_SELECTOR = 'article, main, [role="main"], #content, .content'

# Hostname substring -> main content container for site-specific extraction
DOCUMENTATION_HOST_OVERRIDES: dict[str, str] = {
    "developer.mozilla.org": ".main-page-content, .article, #content-main, .article__content",
    "mozilla.org": ".main-page-content, .article, #content-main, .article__content",
    "mdn.": ".main-page-content, .article, #content-main, .article__content",
}

DOCUMENTATION_STRUCTURE_INDICATORS = DOCUMENTATION_SELECTORS + (
    ".api-docs",
    ".method-list",
    ".parameters",
    ".return-value",
    ".api-documentation",
    "#content-main",
    ".main-page-content",
    ".installation",
    ".quick-start",
    ".getting-started",
    ".examples",
    ".api-reference",
    ".function-documentation",
    ".class-documentation",
    ".method-documentation",
    ".guide",
    ".tutorial",
    ".reference",
)

DOCUMENTATION_MARKER_SELECTORS = (
    "pre, code, .highlight, .code-block",
    ".signature, .method-signature, .function-signature",
    ".parameters, .params, .parameter-list, .arguments, .props",
    ".example, .examples, .demo, .sample",
)

DOCUMENTATION_TOC_SELECTOR = ".table-of-contents, .toc, #toc, .sidebar-toc, .docs-toc"

DOCUMENTATION_URL_PATTERNS = (
    "/docs/",
    "/documentation/",
    "/api/",
    "/reference/",
    "/guide/",
    "/tutorial/",
    "/learn/",
    "/manual/",
    "/handbook/",
    "/developer/",
    "/sdk/",
    "/api-reference/",
    "/mdn/",
    "mozilla.org/docs",
    "developer.mozilla.org",
)

# =============================================================================
# Recipe structure detection
# =============================================================================

RECIPE_STRUCTURE_SELECTORS = (
    ".recipe",
    ".recipe-container",
    ".recipe-card",
    ".recipe-content",
    ".recipe-body",
    ".recipe-main",
    '[itemtype*="Recipe"]',
    '[typeof*="Recipe"]',
    ".recipe-ingredients",
    ".ingredients",
    ".ingredient-list",
    ".recipe-instructions",
    ".instructions",
    ".method",
    ".directions",
    ".recipe-info",
    ".recipe-meta",
    ".recipe-time",
    ".recipe-yield",
)

RECIPE_URL_PATTERN = re.compile(
    r"recipe|recipes|cooking|baking|food|\d+-ingredients|how-to-make|homemade", re.IGNORECASE
)

# =============================================================================
# Click pagination
# =============================================================================

# Playwright selector syntax; :has-text() matches case-insensitive substrings
CLICK_PAGINATION_SELECTORS: tuple[str, ...] = (
    ".pagination a",
    ".pager a",
    ".page-numbers",
    '[aria-label*="page"]',
    '[aria-label*="Page"]',
    ".pages a",
    "a.next",
    "button.next",
    '[rel="next"]',
    ".load-more",
    ".more",
    ".next",
    ".view-more",
    ".show-more",
    ".load-more-button",
    ".load-more-link",
    ".pagination__next",
    ".pagination-next",
    ".pagination__item--next",
    ".pagination-item-next",
    "[data-page-next]",
    '[data-testid="pagination-next"]',
    ".react-paginate .next",
    ".rc-pagination-next",
    ".paging-next",
    ".nextPage",
    ".next-page",
    "li.next a",
    "span.next a",
    'button[rel="next"]',
    'a[rel="next"]',
    "a.nextLink",
    "a.nextpage",
    '[data-pagination="next"]',
    '[data-test="pagination-next"]',
    ".Pagination-module--next",
    '[data-component="next"]',
    'button:has-text("Next")',
    'a:has-text("Next")',
    'button:has-text("More")',
    'a:has-text("More")',
    'button:has-text("Load")',
    'a:has-text("Load")',
    'button:has-text("Show")',
    'a:has-text("Show")',
)
