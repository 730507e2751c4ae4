# 検索
SEARCH_INPUT_SELECTOR = "#search-box-input"
SEARCH_SUBMIT_KEY = "Enter"

# 並び替え
SORT_TRIGGER_SELECTOR = "div.sort-drop"
SORT_OPTIONS_SELECTOR = "ul.sort-value"
SORT_POPULARITY_SELECTOR = "xpath=//li[@data-sorttype='plrty']"

# 価格フィルタ
PRICE_FROM_SELECTOR = "input[name='fromVal']"
PRICE_TO_SELECTOR = "input[name='toVal']"
PRICE_APPLY_SELECTOR = "xpath=//div[contains(@class,'price-go-arrow')]"

# 商品一覧
PRODUCT_TUPLE_SELECTOR = "div.product-tuple-listing"
PRODUCT_TITLE_SELECTOR = "p.product-title"
PRODUCT_PRICE_SELECTOR = "span.product-price"
